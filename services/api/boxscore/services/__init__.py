"""Business logic services.

Freshness policy, the read-through game service and the box score feed
client. Routes call these; dependencies (store, feed client) are passed in.
"""
