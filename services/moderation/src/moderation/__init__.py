"""
VoiceWarden Moderation Engine Service.

Scores transcript text against a profanity lexicon with leet-speak and
misspelling tolerance (batch and live sliding-window detection), scores
topic adherence, checks language policy and participation balance, and
cross-checks proposed flags with an optional LLM validator.
"""
