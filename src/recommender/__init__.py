"""Recommendation module for the storefront.

This module contains the TF-IDF channel scorer, the multi-channel similarity
ranker, the co-purchase ranker and the catalog and order stores they read.
"""
