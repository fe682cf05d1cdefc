from freelancer_server.main import run

run()
