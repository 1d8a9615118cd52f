"""
flatfinder_pipeline.sources — Record sources.

    from flatfinder_pipeline.sources.local import load_units, load_demand
"""
