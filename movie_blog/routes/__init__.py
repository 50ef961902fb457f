# Routes package init
"""
Movie Blog API - API Routes Package
====================================

Route Inventory:
    - root.py:      GET  /                     (plain-text greeting)
    - posts.py:     GET  /posts                (list posts)
                    GET  /posts/{postId}       (get one post, as an array)
                    POST /posts                (create)
                    PUT  /posts/{postId}       (replace)
                    DELETE /posts/{postId}     (delete)
    - fallback.py:  *    /{anything}           (400 "Endpoint not implemented")

Routes stay thin: read the request, validate, make one repository call,
return the result.
"""
