"""Users Domain - accounts, roles, client profiles and authentication"""
