from mangum import Mangum

from main import app

# API Gateway / Function URL entrypoint; the lifespan closes the Supabase client on shutdown
handler = Mangum(app, lifespan="auto")
