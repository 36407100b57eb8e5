"""
Brand Caption Studio - rewrites draft social media captions in a client's brand voice.
"""
__version__ = '1.0.0'
