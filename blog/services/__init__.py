# Services package.
#
#   article_service  — listing, detail and mutations for Article
#   user_service     — user registry backing identity resolution
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Authorization is decided by ``blog.policy``
# before any of them is called.
