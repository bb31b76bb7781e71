"""Game domain services: score codecs, dates and the game repository.

Routes import from here; nothing in this package knows about HTTP.
"""
