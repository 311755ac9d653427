"""Example applications wiring the bridge into FastAPI"""
