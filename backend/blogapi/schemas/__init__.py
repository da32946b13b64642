"""
Blog API - Request/Response Schemas
===================================

Pydantic models that define the JSON contract. Field names are snake_case in
Python and camelCase on the wire (see common.ApiModel).
"""
