"""Appointments Domain - booking, conflict detection, lifecycle and availability"""
