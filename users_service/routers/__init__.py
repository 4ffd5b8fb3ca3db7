# Routers package.
#
#   users    — GetUser, CreateUser, UpdateUser, DeleteUser, ValidateUserCredentials
#   follows  — Follow, UnFollow
