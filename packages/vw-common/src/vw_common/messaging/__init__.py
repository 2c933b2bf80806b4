"""
Messaging utilities for VoiceWarden.

Provides the async Redis client used to publish real-time alert events.
"""
