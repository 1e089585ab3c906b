"""
lasersell package

Shared JSON protocol models for LaserSell stream clients and servers.
"""
