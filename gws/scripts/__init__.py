"""Console entry points: gws-gmail, gws-calendar, gws-sheets, gws-auth."""
