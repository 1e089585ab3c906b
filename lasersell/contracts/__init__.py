"""
Shared, versioned contracts for stream clients and servers.

Rule of thumb:
- Peers OWN behavior (when to send what).
- Contracts OWN schemas (what a valid message looks like).

Import these contracts from both producers and consumers to prevent drift.
"""
