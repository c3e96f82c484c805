"""
Reel - Shorts-style random video feed for a local folder.
"""
__version__ = '1.0.0'
