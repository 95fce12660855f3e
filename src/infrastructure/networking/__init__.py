"""
Networking Infrastructure

- http: aiohttp REST client for token, rate and snapshot lookups

Websocket transports live with the source adapters in exchanges.adapters.
"""
