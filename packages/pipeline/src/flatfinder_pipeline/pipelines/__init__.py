"""
flatfinder_pipeline.pipelines — End-to-end orchestrators.

    from flatfinder_pipeline.pipelines import dashboard

    result = dashboard.run(units, demand, preset="near_transit")
"""
