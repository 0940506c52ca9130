"""
Pic-Tac-Toe - Photo tic-tac-toe engine

Tic-tac-toe where every move is a photo. The package provides:
- A deterministic match engine (turns, win and draw detection)
- Durable match history
- Emoji and GIF reactions
- A REST API and CLI for hosting it
"""

__version__ = "0.1.0"
