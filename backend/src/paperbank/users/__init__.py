"""Users module - personal dashboard and withdrawal of own papers"""
