"""
Test suite for agent-orchestrator.

helpers.py holds the scripted agents (echo, failing, raising, hanging,
concurrency-tracking) and plan builders shared by the test modules.
"""
