"""
Domain services: persistence, progress engine, course player, PIN reset,
roster CSV and per-session application state.
"""
