"""
bloggernetes mirrors BlogPost and BlogPage custom resources from a Kubernetes
cluster into an in-memory store and serves them as a blog with an RSS feed.

The main pieces are:
  - `converter`: turns the generic records delivered by a watch into posts and pages
  - `store`: the concurrently readable index of posts and pages
  - `controller`: keeps the store in agreement with the cluster
  - `server`: read-only web views over the store
"""

__all__ = [
    "config",
    "controller",
    "converter",
    "exceptions",
    "manifest",
    "store",
    "watch",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
