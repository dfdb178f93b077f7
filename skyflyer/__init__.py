"""
Sky Flyer
=========

A frame-driven arcade game: steer a parachuting flyer with the pointer,
dodge falling blocks and collect coins.

The simulation lives in ``skyflyer.flyer_core`` and knows nothing about
rendering. Tunable parameters are in game_config.yaml.
"""
