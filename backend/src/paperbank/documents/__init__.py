"""Documents module - public read paths, downloads and deletion"""
