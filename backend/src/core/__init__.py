"""Core module for Startup Setu configuration and utilities."""
