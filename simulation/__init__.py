"""
Simulation: pygame presentation layer (camera, scene graph, drawing).
"""
