"""Domain Layer: cache contracts, value objects and domain errors.

Has no dependency on the infrastructure layer.
"""
