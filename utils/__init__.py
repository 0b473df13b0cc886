"""SQLShift utilities"""
