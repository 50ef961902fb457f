# Services package init
"""
Movie Blog API - Services Layer
================================

Service Inventory:
    - PostRepository: parameter-bound CRUD statements against `blog_posts`,
      one pooled connection per operation
"""
