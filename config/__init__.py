"""Configuration package"""
from .settings import *
