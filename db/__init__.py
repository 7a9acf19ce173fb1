"""
DynamoDB provisioning and seeding.

Runtime data access lives in the API server. This package is for repo-level DB operations:
- Table descriptors for the Transaction, Course and UserCourseProgress entities
- Reset-and-seed script that loads JSON fixtures from `db/data`
"""
