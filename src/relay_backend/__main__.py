from relay_backend.app import main

main()
