"""
Infrastructure Components

Foundational services shared by the exchange adapters and the spread engine:
- networking: HTTP client used for token, rate and snapshot lookups
- logging: structured logging with async dispatch
- exceptions / error_handling: exception taxonomy and close-code classification
- decorators: retry helpers for REST calls
- utils: task cleanup and the timer scheduler used by adapters
"""
