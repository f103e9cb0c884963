"""Marketplace settlement core: domain, application, data and infrastructure layers."""
