"""Domain packages: one per bounded area, each with entities, repositories, services and a router"""
