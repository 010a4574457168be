# chainloom/logging/tags.py
"""
Logging subsystem tags.

Used as message prefixes so log output stays searchable across modules.
"""

CHAIN = "[CHAIN]"
RUN = "[RUN]"
MEMORY = "[MEMORY]"
RETRY = "[RETRY]"
BATCH = "[BATCH]"
MODEL = "[MODEL]"
RETRIEVER = "[RETRIEVER]"
CLI = "[CLI]"

ALL_TAGS = (CHAIN, RUN, MEMORY, RETRY, BATCH, MODEL, RETRIEVER, CLI)
