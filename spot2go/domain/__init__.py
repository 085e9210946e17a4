"""Domain packages, one per API area"""
