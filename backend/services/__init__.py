"""
Infrastructure around the game engine: settings, the game loop and renderers.
"""
