"""Catalog Domain - categories, services and the services each stylist offers"""
