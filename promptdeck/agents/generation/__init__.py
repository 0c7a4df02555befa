"""
Deck generation: prompt analysis, content strategy, themes, fallback
synthesis and remote generation.
"""
