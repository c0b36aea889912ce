"""Moteur de règles et de simulation du jeu Spaces."""
