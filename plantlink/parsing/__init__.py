"""
This package contains the parsing and validation of data exchanged over the
prompt property and with the advisory backend.

Sub-packages handle specific data formats:

- ``protocol``: The ``PING:<tag>:<text>`` message codec.
- ``care``: Care instruction record validation.
"""
