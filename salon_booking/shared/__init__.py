"""Shared building blocks: errors, validators and response envelopes"""
