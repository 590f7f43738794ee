"""Notifications Domain - in-app notifications and their delivery status"""
