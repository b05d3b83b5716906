"""
Tiendas Backend — Document Models Package

    - store.py: StoreDocument, ReviewDocument, Photo and the category list
"""
