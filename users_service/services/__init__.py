# Services package.
#
#   user_service  — users, credentials and follow edges
#
# Services receive their repository through the constructor; the router
# layer obtains a wired instance from ``users_service.dependencies``.
