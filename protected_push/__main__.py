from protected_push.app import main

main()
