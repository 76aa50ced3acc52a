"""Uploads module - paper submission pipeline and upload endpoint"""
