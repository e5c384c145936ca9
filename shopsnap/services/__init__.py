"""
Services for ShopSnap Backend
"""
