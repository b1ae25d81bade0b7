"""Serverless User API: a DynamoDB-backed user CRUD service for AWS Lambda."""

__version__ = "1.0.0"
