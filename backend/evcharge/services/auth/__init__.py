"""
Auth services package: access tokens carrying user id and role claims
"""
from .tokens import create_token_with_role
