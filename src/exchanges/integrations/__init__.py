"""
Venue integrations.

Each venue package provides the strategies its sources are composed of:
ws_strategies (connection + subscription), message_parser and, for venues
with a REST polling source, rest_strategies.
"""
