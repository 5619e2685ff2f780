"""Catalog domain - clients, truck models, crews and the pricing table"""
