"""
Fruit Parser
============
Event-driven YAML document parser for fruit inventories.

Architecture:
    - Event Source: PyYAML low-level event stream (pull-based)
    - State Machine: Rebuilds Fruit / Variety records from events
    - Validator: Summarizes the parsed inventory and its anomalies
    - Emitter: Writes a fruit list back out as the same event vocabulary

Version: 1.0.0
"""

__version__ = "1.0.0"
