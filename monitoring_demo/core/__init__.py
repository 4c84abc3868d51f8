"""Configuration, logging and errors"""
