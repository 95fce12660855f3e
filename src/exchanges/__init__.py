"""
Exchange sources.

Adapters turn venue ticker feeds into NormalizedTicker streams:
- interfaces: SourceAdapter and RateSource contracts
- base: composable helpers (state, retry policy, normalizer, strategies)
- adapters: websocket and REST polling transports
- integrations: per-venue strategies and parsers
- registry: builds adapters from configuration
"""
