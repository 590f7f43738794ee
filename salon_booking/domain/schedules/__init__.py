"""Schedules Domain - weekly working hours"""
