"""SpiralChain - colored balls roll along a curve toward the launcher.

Fire matching colors into the chain; three or more touching balls of one
color vanish. Clear every ball before the chain reaches the center.
"""
