"""
The MODEL layer contains pure data structures: grid descriptions, channel codes
and the messages exchanged with the computation channel.
It has NO knowledge of Qt or of the worker thread.
"""
